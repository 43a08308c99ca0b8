"""Deployable service profiles.

A profile names which routes one deployable unit exposes and whether it
needs the store. All record profiles share the same ``BookService``.
"""

from dataclasses import dataclass
from enum import StrEnum


class Capability(StrEnum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    AGGREGATE = "aggregate"


@dataclass(frozen=True)
class ServiceProfile:
    name: str
    capabilities: frozenset[Capability]
    description: str

    @property
    def needs_storage(self) -> bool:
        return bool(self.capabilities - {Capability.AGGREGATE})


SERVICE_PROFILES: dict[str, ServiceProfile] = {
    profile.name: profile
    for profile in (
        ServiceProfile(
            "books-post", frozenset({Capability.CREATE}), "Create book records"
        ),
        ServiceProfile("books-get", frozenset({Capability.READ}), "List book records"),
        ServiceProfile(
            "books-put", frozenset({Capability.UPDATE}), "Update book records"
        ),
        ServiceProfile(
            "books-delete", frozenset({Capability.DELETE}), "Delete book records"
        ),
        ServiceProfile(
            "books-api",
            frozenset(
                {
                    Capability.CREATE,
                    Capability.READ,
                    Capability.UPDATE,
                    Capability.DELETE,
                }
            ),
            "All record operations in one process",
        ),
        ServiceProfile(
            "web-server",
            frozenset({Capability.AGGREGATE}),
            "Presentation gateway over the read service",
        ),
    )
}


def get_profile(name: str) -> ServiceProfile:
    try:
        return SERVICE_PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(SERVICE_PROFILES))
        raise ValueError(f"Unknown service {name!r}; expected one of: {known}") from None
