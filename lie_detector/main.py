"""Main script for verifying claims from the command line."""

import asyncio
import logging
import uuid

from .domain.models.claim import Claim
from .domain.models.verification import VerifyOutcome
from .infrastructure.dependencies import ServiceContainer


def print_outcome(outcome: VerifyOutcome) -> None:
    """Print one verification in a readable form."""
    verification = outcome.verification

    print("\nResults:")
    print(f"Rating: {verification.rating.value}")
    print(f"Confidence: {verification.confidence:.2%}")
    if outcome.cached:
        print("(from cache)")
    print(f"\nSummary: {verification.summary}")

    if verification.evidence:
        print("\nEvidence:")
        for i, evidence in enumerate(verification.evidence, 1):
            print(f"{i}. {evidence.source_name}: {evidence.url}")

    if verification.caveats:
        print("\nCaveats:")
        for caveat in verification.caveats:
            print(f"- {caveat}")


async def main():
    """Run the claim verifier."""
    print("LieDetector - claim verification against fact-checkers and references")
    print("-----------------------------------------------------------------------")

    container = ServiceContainer()
    logging.getLogger().setLevel(container.settings.log_level)
    await container.startup()
    service = container.get_verification_service()

    try:
        while True:
            # Get claim from user
            statement = input("\nEnter a claim to verify (or 'quit' to exit): ").strip()
            if statement.lower() in ('quit', 'exit', 'q'):
                break
            if not statement:
                continue

            print("\nChecking sources...")
            claim = Claim(id=f"cli-{uuid.uuid4().hex[:8]}", text=statement)
            print_outcome(await service.verify_one(claim))

    finally:
        # Clean up
        await container.shutdown()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(main())
