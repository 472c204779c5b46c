"""DynamoDB tablo oluşturma ve veri yükleme.

5 tablo: Pharmacies, PharmacyInventory, Medicines, MedicineBrands, MedicineCategories
"""
import json
import os
import sys
from decimal import Decimal

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))
import env_loader  # noqa: F401
from src.config import TABLE_NAMES


REGION = os.environ.get("AWS_DEFAULT_REGION", "us-west-2")
TABLE_PREFIX = os.environ.get("PHARMACY_TABLE_PREFIX", "")
BOTO_CONFIG = Config(retries={"max_attempts": 3})


def _simple_table(table_name: str) -> dict:
    return {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": "id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


def _indexed_table(table_name: str, index_name: str, index_key: str) -> dict:
    """id anahtarlı ve tek bir GSI'ı olan tablo tanımı."""
    return {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": "id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": index_key, "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": index_name,
                "KeySchema": [
                    {"AttributeName": index_key, "KeyType": "HASH"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


def table_definitions(prefix: str = TABLE_PREFIX) -> list:
    """Ön ekli tablo tanımlarını döndürür."""
    return [
        _indexed_table(f"{prefix}{TABLE_NAMES['pharmacies']}", "UserIndex", "user_id"),
        _indexed_table(f"{prefix}{TABLE_NAMES['inventory']}", "PharmacyIndex", "pharmacy_id"),
        _simple_table(f"{prefix}{TABLE_NAMES['medicines']}"),
        _simple_table(f"{prefix}{TABLE_NAMES['brands']}"),
        _simple_table(f"{prefix}{TABLE_NAMES['categories']}"),
    ]


def create_tables(region: str = REGION, prefix: str = TABLE_PREFIX):
    """Tüm DynamoDB tablolarını oluşturur."""
    dynamodb = boto3.client("dynamodb", region_name=region, config=BOTO_CONFIG)

    for table_def in table_definitions(prefix):
        table_name = table_def["TableName"]
        try:
            dynamodb.describe_table(TableName=table_name)
            print(f"  ⏭️  {table_name} zaten mevcut, atlanıyor")
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                print(f"  🔨 {table_name} oluşturuluyor...")
                dynamodb.create_table(**table_def)
                # Tablonun aktif olmasını bekle
                waiter = dynamodb.get_waiter("table_exists")
                waiter.wait(TableName=table_name)
                print(f"  ✓  {table_name} oluşturuldu")
            else:
                raise


def convert_floats(obj):
    """DynamoDB float kabul etmez; float'ları Decimal'e çevirir."""
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: convert_floats(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [convert_floats(i) for i in obj]
    return obj


def load_data_to_table(table_name: str, data: list, region: str = REGION):
    """Kayıtları batch write ile tabloya yükler."""
    dynamodb = boto3.resource("dynamodb", region_name=region, config=BOTO_CONFIG)
    table = dynamodb.Table(table_name)
    with table.batch_writer() as batch:
        for item in convert_floats(data):
            batch.put_item(Item=item)
    print(f"  ✓  {table_name}: {len(data)} kayıt yüklendi")


def load_all_data(data_dir: str = "data_layer/data", region: str = REGION, prefix: str = TABLE_PREFIX):
    """Üretilmiş JSON verilerini DynamoDB'ye yükler."""
    print("\n📤 DynamoDB'ye veri yükleniyor...\n")

    file_map = {
        "pharmacies": "pharmacies.json",
        "brands": "brands.json",
        "categories": "categories.json",
        "medicines": "medicines.json",
        "inventory": "inventory.json",
    }
    for key, filename in file_map.items():
        path = os.path.join(data_dir, filename)
        if not os.path.exists(path):
            print(f"  ⚠️  {path} bulunamadı, atlanıyor")
            continue
        with open(path, "r", encoding="utf-8") as f:
            load_data_to_table(f"{prefix}{TABLE_NAMES[key]}", json.load(f), region)

    print("\n✅ Tüm veriler DynamoDB'ye yüklendi!")


def delete_tables(region: str = REGION, prefix: str = TABLE_PREFIX):
    """Tüm tabloları siler (dikkatli kullan)."""
    dynamodb = boto3.client("dynamodb", region_name=region, config=BOTO_CONFIG)
    for table_def in table_definitions(prefix):
        table_name = table_def["TableName"]
        try:
            dynamodb.delete_table(TableName=table_name)
            print(f"  🗑️  {table_name} silindi")
        except ClientError:
            print(f"  ⏭️  {table_name} bulunamadı, atlanıyor")


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--delete":
        print("🗑️  Tablolar siliniyor...")
        delete_tables()
    else:
        print("🏗️  DynamoDB tabloları oluşturuluyor...\n")
        create_tables()
        load_all_data()
