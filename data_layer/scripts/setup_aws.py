"""AWS altyapısını kurar ve örnek eczane verisini yükler.

Kullanım:
    python -m data_layer.scripts.setup_aws --user <cognito-user-id>   # Kur, üret ve yükle
    python -m data_layer.scripts.setup_aws --delete                   # Tabloları sil
    python -m data_layer.scripts.setup_aws --region eu-west-1         # Farklı region
"""
import sys
import os

# Proje root'unu path'e ekle
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from data_layer.generators.generators import generate_all
from data_layer.infrastructure.dynamodb_setup import REGION, create_tables, delete_tables, load_all_data


def main():
    region = REGION
    user_id = "demo-user"
    delete_mode = False

    # Argümanları parse et
    args = sys.argv[1:]
    for i, arg in enumerate(args):
        if arg == "--delete":
            delete_mode = True
        elif arg == "--region" and i + 1 < len(args):
            region = args[i + 1]
        elif arg == "--user" and i + 1 < len(args):
            user_id = args[i + 1]

    if delete_mode:
        print("🗑️  DynamoDB tabloları siliniyor...\n")
        delete_tables(region)
        print("\n✅ Tüm tablolar silindi!")
        return

    print("=" * 60)
    print("🚀 AWS Altyapı Kurulumu - Eczane Stok Yönetimi")
    print(f"   Region: {region}")
    print("=" * 60)

    # 1. DynamoDB
    print("\n📊 ADIM 1: DynamoDB Tabloları")
    print("-" * 40)
    create_tables(region)

    # 2. Örnek veri
    print("\n🏥 ADIM 2: Örnek Veri Üretimi")
    print("-" * 40)
    generate_all(user_id=user_id)

    # 3. Veri yükleme
    print("\n📤 ADIM 3: Veri Yükleme")
    print("-" * 40)
    load_all_data(region=region)

    print("\n" + "=" * 60)
    print("✅ AWS altyapısı hazır!")
    print(f"   DynamoDB: 5 tablo oluşturuldu ve veri yüklendi")
    print(f"   Eczane sahibi: {user_id}")
    print(f"   Region: {region}")
    print("=" * 60)


if __name__ == "__main__":
    main()
