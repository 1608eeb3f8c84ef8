"""GitTreeFS remote layer.

Fetching and decoding of git objects from the GitHub Git Data API:
- RemoteFetcher: requests-based fetch capability
- Tree, TreeEntry, Blob: immutable decoded objects
"""

from gittreefs.remote.fetcher import FetchFunc, RemoteFetcher, object_url, tree_url
from gittreefs.remote.models import Blob, Tree, TreeEntry, decode_content

__all__ = [
    "FetchFunc",
    "RemoteFetcher",
    "object_url",
    "tree_url",
    "Blob",
    "Tree",
    "TreeEntry",
    "decode_content",
]
