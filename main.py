"""Circada — CLI entry point: analyze one synthetic day and print the report."""

import asyncio
import logging

from circada import CircadianAnalysisEngine, generate_report
from circada.providers import MockDataProvider

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    engine = CircadianAnalysisEngine(MockDataProvider())
    result = asyncio.run(engine.run())
    print(generate_report(result))
