"""Thin filesystem facade so rotation and archival can run against a fake in tests."""

import os


class LocalFileSystem:
    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def remove(self, path: str):
        os.remove(path)

    def rename(self, src: str, target: str):
        os.rename(src, target)

    def listdir(self, path: str) -> list[str]:
        return os.listdir(path)
