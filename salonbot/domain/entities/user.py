from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    phone: str
    name: str

    @property
    def display_name(self) -> str:
        return self.name.lower()
