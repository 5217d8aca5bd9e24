from brigterm.pages.base import Navigator
from brigterm.pages.base import Page
from brigterm.pages.base import PageId
from brigterm.pages.base import PageSet
from brigterm.pages.event import EventPage
from brigterm.pages.job import JobPage
from brigterm.pages.log import LogPage
from brigterm.pages.project import ProjectPage
from brigterm.pages.projects import ProjectsPage

__all__ = [
    "EventPage",
    "JobPage",
    "LogPage",
    "Navigator",
    "Page",
    "PageId",
    "PageSet",
    "ProjectPage",
    "ProjectsPage",
]
