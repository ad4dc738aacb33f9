"""
Simplerity CLI - Command-line interface for the Simplerity integration.

Commands:
- login: Authenticate against Simplerity and list selectable agents
- select: Select the agent to download configuration for
- load: Download the selected agent's packetbeat configuration
"""
