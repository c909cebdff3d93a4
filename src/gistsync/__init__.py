"""Keep winget packages in sync with a YAML manifest stored in a GitHub Gist."""
