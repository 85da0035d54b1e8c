"""
Repository record data structures.

Defines the normalized input unit handed to the engine by the
acquisition layer, together with its contributor entries.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from orgscan.core.exceptions import InputContractViolation
from orgscan.records.edges import RelationshipEdge


@dataclass(frozen=True)
class Contributor:
    """A contributor identity. Only the login takes part in comparisons."""

    login: str
    contributions: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"login": self.login, "contributions": self.contributions}


@dataclass(frozen=True)
class RepositoryRecord:
    """
    Metadata for one repository of an organization.

    Records are immutable once built. The ``relationships`` slot stays
    empty until the assembler produces an annotated copy of the record.
    """

    name: str
    topics: Tuple[str, ...] = ()
    contributors: Tuple[Contributor, ...] = ()
    languages: Dict[str, int] = field(default_factory=dict)
    declared_dependencies: Optional[Dict[str, str]] = None
    stars: Optional[int] = 0
    forks: Optional[int] = 0
    is_private: bool = False
    is_fork: bool = False
    is_archived: bool = False
    full_name: Optional[str] = None
    description: Optional[str] = None
    html_url: Optional[str] = None
    primary_language: Optional[str] = None
    license_name: Optional[str] = None
    relationships: Tuple[RelationshipEdge, ...] = ()

    def __post_init__(self):
        if not isinstance(self.topics, tuple):
            object.__setattr__(self, "topics", tuple(self.topics))
        if not isinstance(self.contributors, tuple):
            object.__setattr__(self, "contributors", tuple(self.contributors))
        if not isinstance(self.relationships, tuple):
            object.__setattr__(self, "relationships", tuple(self.relationships))

    def topic_set(self) -> Set[str]:
        """Deduplicated topics used for every comparison."""
        return set(self.topics)

    def unique_topics(self) -> List[str]:
        """Topics deduplicated, in first-listed order."""
        return list(dict.fromkeys(self.topics))

    def contributor_logins(self) -> List[str]:
        """Contributor logins deduplicated, in first-listed order."""
        return list(dict.fromkeys(c.login for c in self.contributors))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryRecord":
        """
        Build a record from an acquisition-layer JSON object.

        Both snake_case keys and the camelCase keys of the scanner
        output are accepted. Dependencies are read from
        ``declared_dependencies`` or, failing that, from
        ``packageInfo.dependencies``.

        Raises:
            InputContractViolation: If the object has no usable name, or if
                topics, contributors or languages have the wrong shape.
        """
        if not isinstance(data, dict):
            raise InputContractViolation(
                f"Repository entry must be an object, got {type(data).__name__}"
            )

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise InputContractViolation(
                "Repository record is missing its name",
                details={"keys": sorted(data.keys())},
            )

        for key in ("topics", "contributors"):
            value = data.get(key)
            if value is not None and not isinstance(value, list):
                raise InputContractViolation(
                    f"Field '{key}' of {name} must be a list, got {type(value).__name__}",
                    details={"repository": name, "field": key},
                )

        languages = data.get("languages")
        if languages is not None and not isinstance(languages, dict):
            raise InputContractViolation(
                f"Field 'languages' of {name} must be an object, got {type(languages).__name__}",
                details={"repository": name, "field": "languages"},
            )

        contributors = []
        for entry in data.get("contributors") or []:
            if isinstance(entry, str):
                contributors.append(Contributor(login=entry))
            elif isinstance(entry, dict) and entry.get("login"):
                contributors.append(Contributor(
                    login=entry["login"],
                    contributions=entry.get("contributions") or 0,
                ))
            else:
                raise InputContractViolation(
                    f"Contributor entry without a login in {name}",
                    details={"repository": name, "entry": repr(entry)},
                )

        dependencies = _first(data, "declared_dependencies", "declaredDependencies")
        if dependencies is None:
            package_info = _first(data, "package_info", "packageInfo")
            if package_info:
                dependencies = package_info.get("dependencies")

        license_info = data.get("license")
        if isinstance(license_info, dict):
            license_info = license_info.get("name")

        return cls(
            name=name,
            topics=tuple(data.get("topics") or ()),
            contributors=tuple(contributors),
            languages=dict(languages or {}),
            declared_dependencies=dict(dependencies) if dependencies is not None else None,
            stars=_first(data, "stars", "stargazers_count"),
            forks=_first(data, "forks", "forks_count"),
            is_private=bool(_first(data, "is_private", "isPrivate")),
            is_fork=bool(_first(data, "is_fork", "isFork")),
            is_archived=bool(_first(data, "is_archived", "isArchived")),
            full_name=_first(data, "full_name", "fullName"),
            description=data.get("description"),
            html_url=_first(data, "html_url", "htmlUrl"),
            primary_language=_first(data, "primary_language", "language"),
            license_name=license_info,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "full_name": self.full_name,
            "description": self.description,
            "html_url": self.html_url,
            "primary_language": self.primary_language,
            "license": self.license_name,
            "is_private": self.is_private,
            "is_fork": self.is_fork,
            "is_archived": self.is_archived,
            "stars": self.stars,
            "forks": self.forks,
            "topics": list(self.topics),
            "languages": dict(self.languages),
            "contributors": [c.to_dict() for c in self.contributors],
            "declared_dependencies": (
                dict(self.declared_dependencies)
                if self.declared_dependencies is not None
                else None
            ),
            "relationships": [edge.to_dict() for edge in self.relationships],
        }


def _first(data: Dict[str, Any], *keys: str) -> Any:
    """Return the value of the first key present in data."""
    for key in keys:
        if key in data:
            return data[key]
    return None
