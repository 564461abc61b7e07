from .filter_panel import FilterPanel
from .movie_list import MovieList
from .search_bar import SearchBar
from .title_bar import TitleBar
from .trending_bar import TrendingBar

__all__ = ["FilterPanel", "MovieList", "SearchBar", "TitleBar", "TrendingBar"]
