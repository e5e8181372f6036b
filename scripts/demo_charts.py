#!/usr/bin/env python3
"""
Print chart data for generated safety responses.

Usage:
    python scripts/demo_charts.py [--days 180] [--seed 42] [--strategy month]
"""

import asyncio
import json
import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chart_engine import ChartTransformationService, InMemoryResponseStore  # noqa: E402
from chart_engine.logger import setup_logging_from_env  # noqa: E402
from chart_engine.mock_data import MockResponseGenerator  # noqa: E402


def _dump(title, items):
    print(f"\n== {title} ==")
    print(json.dumps([item.model_dump(mode="json", by_alias=True) for item in items], indent=2))


async def run(days: int, seed: int, strategy: str):
    store = InMemoryResponseStore(MockResponseGenerator(seed=seed).generate_safety_history(days=days))

    async with ChartTransformationService(store) as service:
        status = await service.get_data_status("safety")
        print(json.dumps(status.model_dump(mode="json", by_alias=True), indent=2))

        _dump(f"Line ({strategy})", await service.get_line_chart_data_with_strategy("safety", strategy))
        _dump("Line (monthly averages)", await service.get_line_chart_data("safety"))
        _dump("Pie (levels)", await service.get_pie_chart_data("safety"))
        _dump("Pie (descriptions)", await service.get_pie_chart_data("safety", breakdown="descriptions"))

        print("\nStrategies:")
        for option in service.strategies.get_strategy_options():
            print(f"  {option.value:8} {option.label:10} {option.description}")


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Print chart data for generated safety responses")
    parser.add_argument("--days", type=int, default=180, help="Days of history to generate (default: 180)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--strategy", default="month", help="Time period strategy (default: month)")
    args = parser.parse_args()

    setup_logging_from_env()
    asyncio.run(run(args.days, args.seed, args.strategy))


if __name__ == "__main__":
    main()
