"""Developer tooling for building Telegram bots with an AI coding agent."""
