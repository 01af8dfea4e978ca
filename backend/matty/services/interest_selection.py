"""Interest picker state."""
import logging

from matty.schemas.interest import Interest, SelectableInterest
from matty.services.data_store import DataStore

logger = logging.getLogger(__name__)


class InterestSelection:
    def __init__(self, data_store: DataStore):
        self._data_store = data_store
        self.interests: list[SelectableInterest] = []

    @property
    def no_interests(self) -> bool:
        return not self.interests

    @property
    def selected(self) -> list[Interest]:
        return [entry.interest for entry in self.interests if entry.selected]

    async def load(self) -> None:
        """Replace the picker entries with the full taxonomy, nothing selected."""
        result = await self._data_store.fetch_all_interests()
        if not result.ok:
            logger.warning("Loading interests for selection failed: %s", result.reason)
        self.interests = [SelectableInterest(interest=interest) for interest in result.items]

    def toggle(self, name: str) -> bool:
        """Flip the entry named ``name``; False if there is none."""
        for index, entry in enumerate(self.interests):
            if entry.interest.name == name:
                self.interests[index] = entry.toggle()
                return True
        return False
