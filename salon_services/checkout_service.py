"""
salon_services.checkout_service -- Turn a cart into a stored transaction.

Responsibility:
    Check the cart's selections, confirm the therapist against the staff
    directory, append the transaction and clear the cart.

Architecture position:
    Services -- the only place checkout reads the clock.

Invariants enforced:
    - The cart is cleared only after the store accepted the transaction.
    - A failed checkout leaves the cart exactly as it was.

Failure modes:
    - PreconditionError: no customer, no therapist or no items (in that
      order), or the selected staff member does not have the therapist role.
    - TherapistNotFoundError: the selected therapist is not in the
      directory.
    - Any store error propagates; the cart is kept.
"""

from __future__ import annotations

from salon_engines.cart import Cart
from salon_kernel.domain.clock import Clock, SystemClock
from salon_kernel.domain.records import PaymentMethod, TransactionRecord
from salon_kernel.exceptions import PreconditionError, TherapistNotFoundError
from salon_kernel.logging_config import LogContext, get_logger
from salon_services.stores import StaffDirectory, TransactionStore

logger = get_logger("services.checkout")


class CheckoutService:
    """Checkout for carts built at the point of sale."""

    def __init__(
        self,
        store: TransactionStore,
        directory: StaffDirectory,
        clock: Clock | None = None,
    ):
        self._store = store
        self._directory = directory
        self._clock = clock or SystemClock()

    def checkout(self, cart: Cart, payment_method: PaymentMethod | str) -> TransactionRecord:
        """
        Record the sale in ``cart`` and return the stored transaction.

        Raises:
            PreconditionError: missing selection or non-therapist staff.
            TherapistNotFoundError: therapist id not in the directory.
        """
        method = PaymentMethod.parse(payment_method)
        cart.validate_for_checkout()

        therapist = cart.state.therapist
        with LogContext.bind(therapist_id=therapist.id):
            profile = self._directory.get_therapist(therapist.id)
            if profile is None:
                raise TherapistNotFoundError(therapist.id)
            if profile.role != "therapist":
                raise PreconditionError(
                    "therapist", f"Staff member {therapist.id} is not a therapist",
                )

            record = cart.build_transaction(method, self._clock.now())
            saved = self._store.add_transaction(record)
            cart.clear()

            logger.info("checkout_completed", extra={
                "transaction_id": saved.id,
                "customer_id": saved.customer.id,
                "payment_method": saved.payment_method.value,
                "discount_type": saved.discount_type.value,
                "total": str(saved.total),
            })
            return saved
