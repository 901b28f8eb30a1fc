"""Result types shared by the persistence layers."""

from wellcrafted.io.results import LoadResult, SaveResult

__all__ = ["LoadResult", "SaveResult"]
