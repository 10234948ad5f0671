"""Static asset store and distribution cache behaviours."""

from dataclasses import dataclass
from enum import Enum
from fnmatch import fnmatchcase

from topology.errors import BehaviorConfigError

DEFAULT_PATTERN = "*"


class OriginKind(str, Enum):
    OBJECT_STORE = "object_store"
    API_ENDPOINT = "api_endpoint"


class ProtocolPolicy(str, Enum):
    REDIRECT_TO_HTTPS = "redirect-to-https"
    HTTPS_ONLY = "https-only"


@dataclass(frozen=True)
class ObjectStore:
    """
    Bucket holding the static site.

    Attributes:
        private: Block every form of public access
        index_document: Object served for the distribution root
        error_document: Object served on errors
        destroy_on_teardown: Delete the bucket and its objects with the stack
    """
    private: bool = True
    index_document: str = "index.html"
    error_document: str = "error.html"
    destroy_on_teardown: bool = True

    def __post_init__(self) -> None:
        for document in (self.index_document, self.error_document):
            if not document or document.startswith("/"):
                raise BehaviorConfigError(f"document must be a relative object key, got {document!r}")


@dataclass(frozen=True)
class DistributionBehavior:
    path_pattern: str
    origin: OriginKind
    protocol: ProtocolPolicy = ProtocolPolicy.REDIRECT_TO_HTTPS
    cacheable: bool = True

    def __post_init__(self) -> None:
        if not self.path_pattern:
            raise BehaviorConfigError("path pattern must not be empty")

    @property
    def is_default(self) -> bool:
        return self.path_pattern == DEFAULT_PATTERN

    def matches(self, path: str) -> bool:
        return fnmatchcase(path, self.path_pattern)


@dataclass(frozen=True)
class BehaviorSet:
    """
    Exactly one default behaviour (`*`) plus any number of path-specific ones.

    Requests are matched against the most specific pattern first; the default
    behaviour catches everything else.
    """
    behaviors: tuple[DistributionBehavior, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "behaviors", tuple(self.behaviors))
        defaults = [b for b in self.behaviors if b.is_default]
        if len(defaults) != 1:
            raise BehaviorConfigError(
                f"distribution needs exactly one default behaviour, got {len(defaults)}"
            )
        patterns = [b.path_pattern for b in self.behaviors]
        if len(set(patterns)) != len(patterns):
            raise BehaviorConfigError(f"duplicate path patterns in {patterns}")

    @property
    def default(self) -> DistributionBehavior:
        return next(b for b in self.behaviors if b.is_default)

    @property
    def additional(self) -> tuple[DistributionBehavior, ...]:
        """Non-default behaviours, most specific first."""
        extra = [b for b in self.behaviors if not b.is_default]
        return tuple(sorted(extra, key=lambda b: len(b.path_pattern), reverse=True))

    def match(self, path: str) -> DistributionBehavior:
        for behavior in self.additional:
            if behavior.matches(path):
                return behavior
        return self.default
