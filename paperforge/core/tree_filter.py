"""Per-path admission policy for snapshot files."""

from __future__ import annotations

from paperforge.models.config import BuildConfig, FilterPolicy


class TreeFilter:
    """Pure predicate deciding whether a path belongs in the output set.

    Parameters
    ----------
    policy:
        ``EXCLUDE_PREFIX`` rejects any path starting with one of
        *exclusions* and admits everything else. ``ALLOW_LIST`` admits only
        paths exactly equal to one of *allowed*.
    """

    def __init__(
        self,
        policy: FilterPolicy = FilterPolicy.EXCLUDE_PREFIX,
        *,
        exclusions: tuple[str, ...] = (),
        allowed: frozenset[str] = frozenset(),
    ) -> None:
        self._policy = policy
        self._exclusions = tuple(exclusions)
        self._allowed = frozenset(allowed)

    @classmethod
    def from_config(cls, config: BuildConfig) -> TreeFilter:
        return cls(
            config.filter_policy,
            exclusions=config.exclusions,
            allowed=config.allowed_names,
        )

    def admits(self, path: str) -> bool:
        if self._policy == FilterPolicy.ALLOW_LIST:
            return path in self._allowed
        return not any(path.startswith(prefix) for prefix in self._exclusions)

    __call__ = admits
