"""
hytale_launcher package
-----------------------
Local development launcher for Hytale server plugins.
Builds the plugin, stages a runtime directory with the vendor server jar
and the plugin jar, and runs the server with the operator's console attached.
"""

__version__ = "1.0.0"
