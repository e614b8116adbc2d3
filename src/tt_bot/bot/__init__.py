"""Discord bot components: dispatcher, option handling and command extensions."""
