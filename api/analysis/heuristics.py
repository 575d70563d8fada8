"""
Substring heuristics that guess MongoDB usage in a source file.

This is a best-effort hint, not static analysis: strings in comments,
unrelated methods named find() and dynamic collection names all fool it.
"""
import re
from dataclasses import dataclass, field
from typing import List, Set

SOURCE_FILE_PATTERN = re.compile(r"\.(js|ts|jsx|tsx|py|go|rb|php|java|cs)$")

# operation -> substrings that suggest it
OPERATION_MARKERS = {
    "insert": ("insertOne", "insertMany", "insert_one", "insert_many"),
    "find": (".find(", ".findOne(", ".find_one("),
    "update": ("updateOne", "updateMany", "update_one", "update_many"),
    "delete": ("deleteOne", "deleteMany", "delete_one", "delete_many"),
    "aggregate": ("aggregate(",),
}

DRIVER_MARKERS = ("mongodb", "mongoose", "MongoClient", "pymongo")

COLLECTION_PATTERNS = [
    re.compile(r"""db\.collection\(['"]([^'"]+)['"]\)"""),
    re.compile(r"""mongoose\.model\(['"]([^'"]+)['"]"""),
    re.compile(r"""get_collection\(['"]([^'"]+)['"]\)"""),
    re.compile(r"""collection\(['"]([^'"]+)['"]\)"""),
]

COMMON_COLLECTIONS = ["users", "products", "orders", "posts", "comments", "sessions", "accounts"]


@dataclass
class FileScan:
    operations: List[str] = field(default_factory=list)
    mentions_driver: bool = False
    collections: Set[str] = field(default_factory=set)

    @property
    def is_mongo_file(self) -> bool:
        return bool(self.operations) or self.mentions_driver


def is_source_file(path: str) -> bool:
    return bool(SOURCE_FILE_PATTERN.search(path))


def scan_source(content: str) -> FileScan:
    """Guess which operations and collections a file touches"""
    operations = [
        operation for operation, markers in OPERATION_MARKERS.items()
        if any(marker in content for marker in markers)
    ]
    scan = FileScan(
        operations=operations,
        mentions_driver=any(marker in content for marker in DRIVER_MARKERS),
    )
    if scan.is_mongo_file:
        scan.collections = find_collections(content)
    return scan


def find_collections(content: str) -> Set[str]:
    """Collection names from the first pattern that matches anything"""
    for pattern in COLLECTION_PATTERNS:
        names = set(pattern.findall(content))
        if names:
            return names
    return set()


def guess_collections_from_paths(paths: List[str]) -> List[str]:
    """Fallback when no file named a collection explicitly"""
    lowered = [path.lower() for path in paths]
    return [name for name in COMMON_COLLECTIONS if any(name in path for path in lowered)]
