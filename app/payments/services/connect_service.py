"""
Marketplace connected-account management.

Connected accounts are the providers and deliverers that receive payouts.
This service onboards them, reports their readiness and moves funds to them.

Two operations return tagged results instead of raising on a Stripe
failure:

    get_account_status   -> AccountStatusLookup (known / unknown)
    transfer_to_account  -> TransferOutcome (real / synthetic)

Usage:
    service = ConnectService(adapter)

    account = service.create_express_account()
    url = service.create_onboarding_link(account.id)

    lookup = service.get_account_status(account.id)
    if lookup.known and lookup.status.is_enabled:
        outcome = service.transfer_to_account(account.id, 4500)
        if outcome.synthetic:
            alert_operations(outcome.transfer)
"""

from __future__ import annotations

import time

from django.conf import settings

from payments.adapters import ConnectedAccountResult, TransferResult
from payments.exceptions import PaymentError
from payments.services.base import PaymentService
from payments.types import (
    SYNTHETIC_TRANSFER_ID,
    AccountStatus,
    AccountStatusLookup,
    TransferOutcome,
)

REFRESH_PATH = "/reauth"
RETURN_PATH = "/office/billing-settings"


class ConnectService(PaymentService):
    """Onboards connected accounts, reports readiness, transfers funds."""

    @staticmethod
    def connect_country() -> str:
        return settings.STRIPE_CONNECT_COUNTRY

    def create_express_account(self) -> ConnectedAccountResult:
        """
        Create an Express account (Stripe-hosted onboarding).

        Raises:
            GatewayError: Stripe rejected the account
        """
        account = self.adapter.create_connected_account("express", self.connect_country())
        self.get_logger().info("Express account created", extra={"account_id": account.id})
        return account

    def create_custom_account_from_token(self, account_token: str) -> ConnectedAccountResult:
        """
        Create a Custom account from a token collected client-side.

        Stripe's nested error detail, when present, is logged by the adapter
        for operators; the caller only sees the generic GatewayError.

        Raises:
            PaymentValidationError: account_token missing
            GatewayError: Stripe rejected the token or account
        """
        self.require(account_token=account_token)
        account = self.adapter.create_connected_account(
            "custom",
            self.connect_country(),
            account_token=account_token,
        )
        self.get_logger().info("Custom account created", extra={"account_id": account.id})
        return account

    def create_onboarding_link(self, account_id: str) -> str:
        """
        Build a short-lived onboarding URL for the account.

        Raises:
            GatewayError: invalid account id
        """
        self.require(account_id=account_id)
        origin = self.frontend_url()
        return self.adapter.create_account_link(
            account_id,
            refresh_url=f"{origin}{REFRESH_PATH}",
            return_url=f"{origin}{RETURN_PATH}",
        )

    def get_account_status(self, account_id: str) -> AccountStatusLookup:
        """
        Report whether the account is onboarded and able to get paid.

        Never raises: any lookup failure is logged and reported as an
        unknown status whose booleans are all False.
        """
        if not account_id or not str(account_id).strip():
            self.get_logger().warning("Account status requested without an account id")
            return AccountStatusLookup.unknown()

        try:
            account = self.adapter.retrieve_account(account_id)
        except PaymentError as e:
            self.get_logger().error(
                "Could not retrieve connected account status",
                extra={"account_id": account_id, "error_code": e.error_code},
            )
            return AccountStatusLookup.unknown()

        return AccountStatusLookup(status=AccountStatus.from_account(account.raw_response))

    def transfer_to_account(self, account_id: str, amount_cents: int) -> TransferOutcome:
        """
        Move funds from the platform balance to a connected account.

        When Stripe refuses the transfer (typically test-mode restrictions),
        a warning is logged and a synthetic transfer carrying
        SYNTHETIC_TRANSFER_ID is returned so calling code keeps working
        outside production. The outcome is tagged synthetic so it can be
        alerted on and kept out of accounting.

        Raises:
            PaymentValidationError: account_id missing or amount not positive
        """
        self.require(account_id=account_id, amount=amount_cents)
        if amount_cents <= 0:
            raise self.validation_error_class(
                "Amount must be a positive number of cents",
                details={"amount_cents": amount_cents},
            )

        currency = self.default_currency()
        try:
            transfer = self.adapter.create_transfer(amount_cents, account_id, currency)
        except PaymentError as e:
            self.get_logger().warning(
                "Transfer failed, returning synthetic transfer",
                extra={
                    "account_id": account_id,
                    "amount_cents": amount_cents,
                    "error_code": e.error_code,
                    "transfer_id": SYNTHETIC_TRANSFER_ID,
                },
            )
            return TransferOutcome(
                transfer=TransferResult(
                    id=SYNTHETIC_TRANSFER_ID,
                    amount_cents=amount_cents,
                    currency=currency,
                    destination_account=account_id,
                    created=int(time.time()),
                ),
                synthetic=True,
            )

        self.get_logger().info(
            "Transfer created",
            extra={
                "account_id": account_id,
                "amount_cents": amount_cents,
                "transfer_id": transfer.id,
            },
        )
        return TransferOutcome(transfer=transfer)
