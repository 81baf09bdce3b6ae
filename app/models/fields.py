"""
Contains enums shared by tables and response models.
"""
from enum import Enum

class PodcastStatus(str, Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class EpisodeStatus(str, Enum):
    draft = "draft"
    scheduled = "scheduled"
    published = "published"
    archived = "archived"


class EpisodeOrder(str, Enum):
    newest_first = "newest_first"
    oldest_first = "oldest_first"


class SearchType(str, Enum):
    podcast = "podcast"
    episode = "episode"
    all = "all"

    @property
    def includes_podcasts(self) -> bool:
        return self in (SearchType.podcast, SearchType.all)

    @property
    def includes_episodes(self) -> bool:
        return self in (SearchType.episode, SearchType.all)
