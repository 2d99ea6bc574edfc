"""browser-contexts: isolated browser profiles with URLs, bookmarks and editor workspaces."""
