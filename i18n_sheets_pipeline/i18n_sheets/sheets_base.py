from abc import ABC, abstractmethod
from typing import List, Sequence

from .rows import RowTable

class SheetBackend(ABC):
    @abstractmethod
    def get_sheet_names(self) -> List[str]:
        ...

    @abstractmethod
    def get_sheet_data(self, name: str) -> RowTable:
        ...

    @abstractmethod
    def update_sheet_data(self, name: str, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        ...
