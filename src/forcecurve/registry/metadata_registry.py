"""Key derivation and the aggregate key -> CurveMetadata table"""
import json
import logging
import re
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Iterator, List, Optional

from ..constants import NAME_BOILERPLATE
from ..exceptions import CurveNotFoundError, RegistryFrozenError
from ..models import CurveMetadata, CurveRecord

logger = logging.getLogger(__name__)

_BOILERPLATE_RE = re.compile(re.escape(NAME_BOILERPLATE), re.IGNORECASE)
_SLUG_SEPARATOR_RE = re.compile(r'[\W_]+')
_WHITESPACE_RE = re.compile(r'\s+')


def _path_parts(path: str) -> List[str]:
    """Split a path on either separator, dropping the file extension"""
    parts = [part for part in str(path).replace('\\', '/').split('/') if part not in ('', '.')]
    if parts:
        parts[-1] = PurePosixPath(parts[-1]).stem
    return parts


def _slugify(text: str) -> str:
    text = _BOILERPLATE_RE.sub('', text).casefold()
    return _SLUG_SEPARATOR_RE.sub('-', text).strip('-')


def make_curve_key(path: str) -> str:
    """
    Derive the registry key of a curve file.

    Directory components are kept so that identically named files from
    different vendors stay apart.

    Example:
        ``Gateron/Gateron_Yellow Raw Data CSV.csv`` -> ``gateron/gateron-yellow``

    Args:
        path: File identity relative to the curve library root

    Returns:
        Lowercase slug key
    """
    slugs = (_slugify(part) for part in _path_parts(path))
    return '/'.join(slug for slug in slugs if slug)


def switch_name(path: str) -> str:
    """Human readable switch name from a curve file path"""
    parts = _path_parts(path)
    if not parts:
        return ''
    name = _BOILERPLATE_RE.sub('', parts[-1].replace('_', ' '))
    return _WHITESPACE_RE.sub(' ', name).strip()


class MetadataRegistry:
    """
    Key -> CurveMetadata table built once all records exist.

    The first registration of a key wins; later collisions are logged and
    kept in ``duplicates``. The table is only valid for consumers after
    ``freeze()``.
    """

    def __init__(self):
        self._entries: Dict[str, CurveMetadata] = {}
        self._identities: Dict[str, str] = {}
        self.duplicates: List[Dict[str, str]] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, identity: str, metadata: CurveMetadata, key: Optional[str] = None) -> bool:
        """
        Add a curve's metadata.

        Args:
            identity: File identity the metadata was extracted from
            metadata: Extracted CurveMetadata
            key: Precomputed key, derived from ``identity`` when omitted

        Returns:
            True if stored, False if the key was already taken

        Raises:
            RegistryFrozenError: If the registry was frozen
        """
        key = key if key is not None else make_curve_key(identity)
        if self._frozen:
            raise RegistryFrozenError(key)

        if key in self._entries:
            kept = self._identities[key]
            logger.warning(f"Duplicate curve key '{key}': keeping {kept}, dropping {identity}")
            self.duplicates.append({'key': key, 'kept': kept, 'dropped': identity})
            return False

        self._entries[key] = metadata
        self._identities[key] = identity
        return True

    def freeze(self) -> 'MetadataRegistry':
        """Close the registry for further registration"""
        self._frozen = True
        logger.info(f"Metadata registry frozen with {len(self._entries)} curves "
                    f"({len(self.duplicates)} duplicates dropped)")
        return self

    @classmethod
    def from_records(cls, records: Iterable[CurveRecord]) -> 'MetadataRegistry':
        """Build and freeze a registry from the complete record list"""
        registry = cls()
        for record in records:
            registry.register(record.identity, record.metadata, key=record.key)
        return registry.freeze()

    def get(self, key: str) -> CurveMetadata:
        """
        Look up a curve's metadata.

        Raises:
            CurveNotFoundError: If no curve was registered under ``key``
        """
        try:
            return self._entries[key]
        except KeyError:
            raise CurveNotFoundError(key) from None

    def identity_of(self, key: str) -> str:
        """File identity that owns ``key``"""
        try:
            return self._identities[key]
        except KeyError:
            raise CurveNotFoundError(key) from None

    def __getitem__(self, key: str) -> CurveMetadata:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def keys(self) -> List[str]:
        return list(self._entries)

    def items(self):
        return self._entries.items()

    def to_dict(self) -> Dict[str, Dict]:
        """Serializable table in registration order"""
        return {key: metadata.to_dict() for key, metadata in self._entries.items()}

    def save(self, filepath: Path) -> Path:
        """Write the table as JSON"""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved metadata for {len(self)} curves to {filepath}")
        return filepath

    @classmethod
    def load(cls, filepath: Path) -> 'MetadataRegistry':
        """Read a saved table into a frozen registry"""
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        registry = cls()
        for key, metadata in data.items():
            registry.register(key, CurveMetadata.from_dict(metadata), key=key)
        return registry.freeze()
