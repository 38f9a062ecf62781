"""ytrs-cli: download, play and summarize YouTube media through external tools."""

__version__ = "0.3.0"
