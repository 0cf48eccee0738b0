"""Machine use cases."""

from .queries import ListMachinesQuery, MachinePage
from .use_cases import CreateMachine, DeleteMachine, GetMachine, ListMachines, UpdateMachine

__all__ = [
    "CreateMachine",
    "GetMachine",
    "ListMachines",
    "UpdateMachine",
    "DeleteMachine",
    "ListMachinesQuery",
    "MachinePage",
]
