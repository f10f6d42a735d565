# src/account_admin/services/resource/replicator.py

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from account_admin.core.storage.base import BaseStorageProvider
from account_admin.core.storage.paths import join_path
from account_admin.services.exceptions import ResourceMissingError
from .tree import ResourceNode

logger = logging.getLogger(__name__)

@dataclass
class ReplicationReport:
    copied_files: List[str] = field(default_factory=list)
    created_directories: List[str] = field(default_factory=list)

async def replicate_forest(
    storage: BaseStorageProvider,
    forest: Iterable[ResourceNode],
    src_base: str,
    dst_base: str,
    report: Optional[ReplicationReport] = None,
) -> ReplicationReport:
    """
    Copies a resource forest from `src_base` to `dst_base`, depth-first, in forest order.

    Full names are relative to the category root, so every node resolves
    against the same two base paths no matter how deep it sits. Files are
    copied with overwrite, empty directories are created when absent and
    non-empty directories only recurse (their children recreate the path).

    A node whose source is missing aborts the whole walk with
    `ResourceMissingError`; later siblings are not touched. The destination
    may then hold a partial copy, which a repeated run overwrites.
    """
    if report is None:
        report = ReplicationReport()

    for node in forest:
        src_path = join_path(src_base, node.full_name)
        dst_path = join_path(dst_base, node.full_name)

        if not await storage.exists(src_path):
            logger.error(f"resource file: {node.full_name} not exist at {src_path}, copy aborted")
            raise ResourceMissingError(node.full_name, src_path)

        if not node.is_directory:
            await storage.copy(src_path, dst_path, overwrite=True, preserve_metadata=True)
            logger.info(f"copied resource {src_path} -> {dst_path}")
            report.copied_files.append(dst_path)
            continue

        if not node.children:
            if not await storage.exists(dst_path):
                await storage.mkdir(dst_path)
                logger.info(f"created resource directory {dst_path}")
                report.created_directories.append(dst_path)
            continue

        await replicate_forest(storage, node.children, src_base, dst_base, report)

    return report
