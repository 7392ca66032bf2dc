"""GATE 2: Item Availability

- Третий gate в цепочке (только для PICK)
- Блокирует PICK, если:
  * item_id отсутствует в каталоге
  * item уже принадлежит какому-либо участнику

Вместе с атомарным append в ledger гарантирует, что один item
не окажется в двух roster и дважды в одном.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from src.core.domain.item import Item
from src.gatekeeper.rejections import Rejection, RejectionReason

if TYPE_CHECKING:
    from src.draft.session import DraftSession


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""
    
    action_allowed: bool
    block_reason: str
    rejection: Optional[Rejection]
    
    # Найденный item (None если не в каталоге)
    item: Optional[Item]
    owner_id: Optional[str]
    
    # Детали
    details: str


class Gate02ItemAvailability:
    """GATE 2: наличие item в каталоге и его доступность."""
    
    def evaluate(self, session: "DraftSession", item_id: str) -> Gate02Result:
        item = session.catalog.get(item_id)
        
        if item is None:
            rejection = Rejection(
                reason=RejectionReason.ITEM_UNAVAILABLE,
                details=f"Item {item_id!r} is not in the catalog",
            )
            return Gate02Result(
                action_allowed=False,
                block_reason=rejection.reason.value,
                rejection=rejection,
                item=None,
                owner_id=None,
                details=rejection.details,
            )
        
        owner_id = session.owner_by_item.get(item_id)
        if owner_id is not None:
            rejection = Rejection(
                reason=RejectionReason.ITEM_UNAVAILABLE,
                details=f"{item.name} has already been picked by {owner_id}",
            )
            return Gate02Result(
                action_allowed=False,
                block_reason=rejection.reason.value,
                rejection=rejection,
                item=item,
                owner_id=owner_id,
                details=rejection.details,
            )
        
        return Gate02Result(
            action_allowed=True,
            block_reason="",
            rejection=None,
            item=item,
            owner_id=None,
            details=f"PASS: {item.name} available",
        )
