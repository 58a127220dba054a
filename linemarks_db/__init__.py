from .dao import MemoryStateDAO, StateDAO
from .models import StateEntry

__all__ = ["MemoryStateDAO", "StateDAO", "StateEntry"]
