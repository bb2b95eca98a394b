"""
Path Resolver
=============
검증된 파일 이름을 루트 디렉토리 안의 정규화된 절대 경로로 변환합니다.
심볼릭 링크를 따라간 결과까지 루트 내부에 있는지 다시 확인합니다 (Path Traversal 방지).
"""

import errno
import logging
from dataclasses import dataclass
from pathlib import Path

from safe_backup.errors import ErrorKind, ResolutionError
from safe_backup.validator import Filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedPath:
    """Canonical path proven to be a descendant of ``root``."""

    name: Filename
    path: Path
    root: Path

    @property
    def entry(self) -> Path:
        """Directory entry named by the user (the link itself for symlinks)."""
        return self.root / self.name.value

    def exists(self) -> bool:
        return self.path.exists()

    def is_file(self) -> bool:
        return self.path.is_file()

    def __str__(self) -> str:
        return str(self.path)


def is_within(root: Path, target: Path) -> bool:
    """*target* 가 *root* 의 하위 경로인지 확인 (root 자신은 제외)"""
    return root in target.parents


def _canonical_root(root: Path) -> Path:
    try:
        return Path(root).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise ResolutionError(ErrorKind.IO_FAILURE, f"root {str(root)!r} is unavailable", cause=e)


def resolve(name: Filename, root: Path) -> ResolvedPath:
    """
    Join *name* to *root*, canonicalize, and verify containment.

    A missing target is legitimate (backup or restore destinations): the
    parent is canonicalized instead and the name re-appended. Dangling
    symlinks and symlink loops are rejected outright.
    """
    if not isinstance(name, Filename):
        raise TypeError("resolve() requires a validated Filename")

    canonical_root = _canonical_root(root)
    candidate = canonical_root / name.value

    try:
        target = candidate.resolve(strict=True)
    except FileNotFoundError:
        if candidate.is_symlink():
            logger.warning(f"Dangling symlink rejected: {candidate}")
            raise ResolutionError(ErrorKind.PATH_TRAVERSAL, f"{name.value!r} is a dangling symlink")
        try:
            parent = candidate.parent.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise ResolutionError(ErrorKind.IO_FAILURE, f"cannot resolve parent of {name.value!r}", cause=e)
        target = parent / candidate.name
    except RuntimeError:
        # Python < 3.13 reports symlink loops as RuntimeError
        raise ResolutionError(ErrorKind.PATH_TRAVERSAL, f"symlink loop at {name.value!r}")
    except OSError as e:
        if e.errno == errno.ELOOP:
            raise ResolutionError(ErrorKind.PATH_TRAVERSAL, f"symlink loop at {name.value!r}")
        raise ResolutionError(ErrorKind.IO_FAILURE, f"cannot resolve {name.value!r}", cause=e)

    if not is_within(canonical_root, target):
        logger.warning(f"Containment check failed: {name.value!r} -> {target} (root {canonical_root})")
        raise ResolutionError(
            ErrorKind.PATH_TRAVERSAL,
            f"{name.value!r} resolves outside {canonical_root}",
        )

    return ResolvedPath(name=name, path=target, root=canonical_root)
