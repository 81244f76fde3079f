from starsearch.utils.connectivity import ConnectionChecker, SocketConnectionChecker
from starsearch.utils.live_data import LiveData, MutableLiveData
from starsearch.utils.logging import setup_logging

__all__ = ["ConnectionChecker", "SocketConnectionChecker", "LiveData", "MutableLiveData", "setup_logging"]
