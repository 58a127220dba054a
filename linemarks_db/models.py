from dataclasses import dataclass


@dataclass
class StateEntry:
    key: str
    value_json: str
    updated_at: str
