"""
Unity .meta Parser
Reads the GUID Unity assigns to an asset from its adjacent .meta file.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import yaml

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta"

# (file path, exception) for failures that are logged and skipped
ErrorCallback = Callable[[str, Exception], None]


class MetaParser:
    """Extract asset GUIDs from .meta files."""

    GUID_KEY = "guid"

    def meta_path_for(self, asset_path: str | Path) -> Path:
        """Assets/Player.cs -> Assets/Player.cs.meta"""
        asset_path = Path(asset_path)
        return asset_path.with_name(asset_path.name + META_SUFFIX)

    def extract_guid_from_file(
        self,
        meta_path: str | Path,
        on_error: Optional[ErrorCallback] = None
    ) -> Optional[str]:
        """Read a .meta file; a missing file is not an error."""
        meta_path = Path(meta_path)
        if not meta_path.is_file():
            return None
        try:
            content = meta_path.read_text(encoding='utf-8-sig')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read meta file %s: %s", meta_path, e)
            if on_error:
                on_error(str(meta_path), e)
            return None
        return self.extract_guid(content, str(meta_path), on_error)

    def extract_guid(
        self,
        content: str,
        path: str = "",
        on_error: Optional[ErrorCallback] = None
    ) -> Optional[str]:
        """Return the top-level guid value, or None."""
        try:
            # BaseLoader keeps every scalar as text, so all-digit GUIDs survive
            root = next(yaml.load_all(content, Loader=yaml.BaseLoader), None)
        except yaml.YAMLError as e:
            logger.warning("Error parsing meta file %s: %s", path or "<string>", e)
            if on_error:
                on_error(path, e)
            return None

        if not isinstance(root, dict):
            return None

        guid = root.get(self.GUID_KEY)
        if isinstance(guid, str) and guid:
            return guid
        return None

    def guid_for_asset(
        self,
        asset_path: str | Path,
        on_error: Optional[ErrorCallback] = None
    ) -> Optional[str]:
        return self.extract_guid_from_file(self.meta_path_for(asset_path), on_error)
