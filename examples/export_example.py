"""End-to-end export example.

This example exports one record collection to CSV, JSON and PDF using
RXT's registry and runner.

Prerequisites:
- rxt installed (pip install -e .)
"""

import tempfile
from decimal import Decimal
from pathlib import Path

from rxt import ExportConfig, ExportOptions, ExportRequest, ExportRunner, create_default_registry
from rxt.utils.logging import configure_logging

ORDERS = [
    {"order_id": 1, "customer": "Alice", "amount": Decimal("99.95"), "status": "completed"},
    {"order_id": 2, "customer": "Bob", "amount": Decimal("149.50"), "status": "completed"},
    {"order_id": 3, "customer": "Charlie", "amount": Decimal("75.00"), "status": "pending"},
    {"order_id": 4, "customer": "Diana", "amount": Decimal("299.99"), "status": "completed",
     "items": [{"sku": "A-1", "qty": 2}]},
    {"order_id": 5, "customer": "Eve", "amount": Decimal("50.25"), "status": "cancelled"},
]


def example_single_format(output_dir: Path):
    """Example 1: One format through the registry."""
    print("\n" + "=" * 60)
    print("Example 1: Single Format")
    print("=" * 60)

    registry = create_default_registry()
    outcome = registry.dispatch(
        ExportRequest(records=ORDERS, format="csv", output_path=output_dir / "orders.csv")
    )
    print(f"  {outcome.diagnostic}")
    print(Path(outcome.file_path).read_text(encoding="utf-8"))


def example_filtered_multi_format(output_dir: Path):
    """Example 2: Filter + projection, written to every built-in format."""
    print("\n" + "=" * 60)
    print("Example 2: Filtered Multi-Format")
    print("=" * 60)

    registry = create_default_registry()
    options = ExportOptions(
        filters={"status": "completed"},
        fields=["order_id", "customer", "amount"],
        include_metadata=True,
    )
    results = registry.export_multiple(ORDERS, output_dir / "completed", ["csv", "json", "pdf", "xml"], options)
    for kind, ok in results.items():
        print(f"  {'✓' if ok else '✗'} {kind}")


def example_runner(output_dir: Path):
    """Example 3: Unique artifact paths via ExportRunner."""
    print("\n" + "=" * 60)
    print("Example 3: Export Runner")
    print("=" * 60)

    runner = ExportRunner()
    outcomes = runner.export_many(ORDERS, ExportConfig(format="json"), ["json", "pdf"], output_dir, name="orders")
    for kind, outcome in outcomes.items():
        print(f"  {kind}: {outcome.file_path}")


def main():
    """Run all examples."""
    print("=" * 60)
    print("RXT Export Examples")
    print("=" * 60)

    configure_logging("WARNING")
    output_dir = Path(tempfile.mkdtemp(prefix="rxt-example-"))

    example_single_format(output_dir)
    example_filtered_multi_format(output_dir)
    example_runner(output_dir)

    print("\n" + "=" * 60)
    print(f"✅ Artifacts written to {output_dir}")
    print("=" * 60)


if __name__ == "__main__":
    main()
