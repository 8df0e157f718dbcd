"""Main script for running verisite interactively."""

import asyncio
import logging

from .infrastructure.dependencies import ServiceContainer


def print_report(result: dict) -> None:
    """Print a verification response in a readable form."""
    if not result.get("success"):
        print(f"\nError: {result.get('error')}: {result.get('message')}")
        return

    print("\nResults:")
    print(f"Verdict: {result['verdict']}")
    print(f"Confidence: {result['confidence']}%")
    print(f"\nExplanation: {result['explanation']}")

    print("\nSources:")
    for i, source in enumerate(result["sources"], 1):
        print(f"{i}. [{source['credibility']}] {source['title']} ({source['url'] or source['source_name']})")

    errors = result["metadata"]["search_errors"]
    if errors:
        print("\nSearch errors:")
        for error in errors:
            print(f"- {error['provider']}: {error['message']}")
    print(f"\nAPIs used: {', '.join(result['metadata']['apis_used'])}")


async def main():
    """Run the verifier."""
    print("Verisite - claim extraction and multi-source verification")
    print("---------------------------------------------------------")

    container = ServiceContainer()
    await container.initialize()
    pipeline = container.get_pipeline()

    try:
        while True:
            # Get statement from user
            statement = input("\nEnter a statement to verify (or 'quit' to exit): ")
            if statement.lower() in ('quit', 'exit', 'q'):
                break
            if not statement.strip():
                continue

            print("\nVerifying...")
            print_report(await pipeline.verify_text(statement))

    finally:
        # Clean up
        await container.shutdown()


def run() -> None:
    """Entry point for the interactive verifier."""
    logging.basicConfig(level=logging.WARNING)
    asyncio.run(main())


if __name__ == "__main__":
    run()
