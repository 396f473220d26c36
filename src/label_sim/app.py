"""Shared FastMCP instance for label_sim tools."""

from mcp.server.fastmcp import FastMCP

mcp = FastMCP("label-sim")
