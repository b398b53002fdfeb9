from dataclasses import dataclass
from enum import Enum

class AccessType(Enum):
    READ = "R"
    WRITE = "W"

@dataclass
class Access:
    type: AccessType
    address: str
