#
#
#

from dataclasses import dataclass, field
from typing import List

from .endpoint import Endpoint


@dataclass
class Changes:
    """A reconciliation batch computed by the controller.

    Updates arrive as two parallel lists: the records as they exist now
    (``update_old``) and as they should be (``update_new``).
    """

    create: List[Endpoint] = field(default_factory=list)
    update_old: List[Endpoint] = field(default_factory=list)
    update_new: List[Endpoint] = field(default_factory=list)
    delete: List[Endpoint] = field(default_factory=list)

    def has_changes(self) -> bool:
        return bool(
            self.create or self.update_old or self.update_new or self.delete
        )
