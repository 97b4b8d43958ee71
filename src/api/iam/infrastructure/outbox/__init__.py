"""IAM-specific outbox infrastructure.

Contains the serializer for IAM domain events, used by the repositories
when appending to the outbox.
"""

from iam.infrastructure.outbox.serializer import IAMEventSerializer

__all__ = ["IAMEventSerializer"]
