import logging

import pytest


MIB = 1 << 20


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)


@pytest.fixture
def make_sysfs(tmp_path):
    """Build a fake /sys/devices/system/memory tree and return the sysroot."""

    def _make(blocks, block_size=128 * MIB, write_block_size=True):
        memory_dir = tmp_path / "sys" / "devices" / "system" / "memory"
        memory_dir.mkdir(parents=True, exist_ok=True)
        if write_block_size:
            (memory_dir / "block_size_bytes").write_text(f"{block_size:x}\n")
        for blk in blocks:
            block_dir = memory_dir / f"memory{blk['index']}"
            block_dir.mkdir()
            (block_dir / "state").write_text(blk.get("state", "online") + "\n")
            (block_dir / "removable").write_text(f"{int(blk.get('removable', False))}\n")
            if blk.get("node") is not None:
                (block_dir / f"node{blk['node']}").mkdir()
        return tmp_path

    return _make

