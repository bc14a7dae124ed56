"""AWS path analyzer: network reachability and flow simulation"""

__version__ = "0.1.0"
