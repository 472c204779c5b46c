"""
Gerçek DynamoDB tabloları ile stok paneli demo script'i.

Kullanım:
    export AWS_DEFAULT_REGION="us-west-2"
    export AWS_ACCESS_KEY_ID="..."
    export AWS_SECRET_ACCESS_KEY="..."
    python -m data_layer.scripts.setup_aws --user demo-user
    python demo.py demo-user [arama terimi]
"""

import logging
import os
import sys

import env_loader  # noqa: F401

from src.config import Settings
from src.inventory.formatting import format_currency, format_date, status_labels
from src.inventory.panel import InventoryPanel
from src.inventory.repository import InventoryRepository
from src.models.pharmacy import CurrentUser


def check_credentials():
    """AWS credential'larının ayarlı olduğunu kontrol eder."""
    required = ["AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"]
    missing = [k for k in required if not os.environ.get(k)]
    if missing:
        print("❌ Eksik environment variable'lar:", ", ".join(missing))
        sys.exit(1)
    print("✅ AWS credential'ları ayarlı")


def print_view(panel: InventoryPanel):
    view = panel.view()
    s = view.summary
    print(f"\n📊 Görünen: {s.total} / {s.collection_total} toplam")
    print(f"   Düşük stok: {s.low_stock}  |  Yakında dolacak: {s.expiring_soon}  |  Süresi geçmiş: {s.expired}")
    print("-" * 100)
    for item in view.visible:
        badges = ", ".join(status_labels(view.statuses[item.id]))
        print(
            f"  {item.medicine_name:<14} {item.brand_name:<14} {item.category_name:<18} "
            f"{item.batch_number:<14} {format_date(item.expiry_date)}  "
            f"{item.quantity_in_stock:>4}/{item.minimum_stock_level:<4} "
            f"{format_currency(item.selling_price):>9}  [{badges}]"
        )


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    check_credentials()

    user_id = sys.argv[1] if len(sys.argv) > 1 else "demo-user"
    repository = InventoryRepository(settings=Settings.from_env())
    panel = InventoryPanel(repository, user_provider=lambda: CurrentUser(id=user_id))
    panel.load()

    for n in panel.dismiss_notifications():
        print(f"⚠️  {n.title}: {n.description}")

    if len(sys.argv) > 2:
        panel.set_search_term(sys.argv[2])
    print_view(panel)


if __name__ == "__main__":
    main()
