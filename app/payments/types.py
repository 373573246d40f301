"""
Result types shared by the payment services.

The orchestration layer keeps no durable copy of Stripe data. Services
return these dataclasses, built on demand from the adapter's results and
discarded after the request.

Two of them are tagged results for the lenient code paths:
- AccountStatusLookup: Known(status) or Unknown (lookup failed)
- TransferOutcome: Real(transfer) or Synthetic(transfer)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from payments.adapters.stripe_adapter import TransferResult


# Sentinel id carried by placeholder transfers returned when Stripe refuses a transfer
SYNTHETIC_TRANSFER_ID = "mock_transfer"


# =============================================================================
# Charges
# =============================================================================


@dataclass(frozen=True)
class ChargeOutcome:
    """Result of an immediate off-session charge."""

    payment_intent_id: str
    status: str


@dataclass(frozen=True)
class EscrowIntent:
    """
    A manual-capture PaymentIntent waiting for client confirmation.

    Attributes:
        payment_intent_id: Stripe PaymentIntent ID (pi_xxx), used for capture
        client_secret: Secret handed to the frontend to confirm the card
    """

    payment_intent_id: str
    client_secret: str | None


# =============================================================================
# Connected Accounts
# =============================================================================


@dataclass(frozen=True)
class AccountStatus:
    """
    Onboarding readiness of a connected account.

    Attributes:
        is_valid: All onboarding details have been submitted
        is_enabled: Both charges and payouts are enabled
        needs_id_card: An identity document is currently due
    """

    is_valid: bool = False
    is_enabled: bool = False
    needs_id_card: bool = False

    @classmethod
    def from_account(cls, account: dict[str, Any]) -> AccountStatus:
        """Derive the status from a Stripe account dict."""
        requirements = account.get("requirements") or {}
        currently_due = requirements.get("currently_due") or []
        return cls(
            is_valid=account.get("details_submitted") is True,
            is_enabled=(
                account.get("charges_enabled") is True
                and account.get("payouts_enabled") is True
            ),
            needs_id_card=any("verification.document" in req for req in currently_due),
        )


@dataclass(frozen=True)
class AccountStatusLookup:
    """
    Tagged result of an account status lookup.

    When the lookup fails, known is False and status is all-false, so callers
    that only read the booleans keep the lenient behavior while callers that
    care can tell "not ready" apart from "lookup failed".
    """

    status: AccountStatus
    known: bool = True

    @classmethod
    def unknown(cls) -> AccountStatusLookup:
        return cls(status=AccountStatus(), known=False)

    def to_response(self) -> dict[str, bool]:
        return {
            "isValid": self.status.is_valid,
            "isEnabled": self.status.is_enabled,
            "needsIdCard": self.status.needs_id_card,
            "statusKnown": self.known,
        }


@dataclass(frozen=True)
class TransferOutcome:
    """
    Tagged result of a transfer to a connected account.

    A synthetic outcome means Stripe refused the transfer and a placeholder
    with SYNTHETIC_TRANSFER_ID was returned instead. Downstream accounting
    must never book a synthetic transfer as settled funds.
    """

    transfer: TransferResult
    synthetic: bool = False

    @property
    def is_real(self) -> bool:
        return not self.synthetic


# =============================================================================
# Statistics
# =============================================================================


@dataclass(frozen=True)
class RevenueWindow:
    """Revenue of paid, non-refunded charges created in [start, end]."""

    start: int
    end: int
    total_cents: int

    @property
    def total_euros(self) -> Decimal:
        return Decimal(self.total_cents) / 100


@dataclass(frozen=True)
class CustomerStats:
    total: int
    new: int


@dataclass
class MethodStats:
    method: str
    count: int = 0
    value: Decimal = field(default_factory=Decimal)


@dataclass(frozen=True)
class PaymentStats:
    """
    Aggregates over the 100 most recent PaymentIntents.

    Rates are percentages in [0, 100]. Values are in major currency units.
    """

    success_rate: float
    average_value: Decimal
    refund_rate: float
    by_method: list[MethodStats]

    @classmethod
    def empty(cls) -> PaymentStats:
        return cls(
            success_rate=0.0,
            average_value=Decimal(0),
            refund_rate=0.0,
            by_method=[],
        )
