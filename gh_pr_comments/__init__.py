"""Extract GitHub pull request review comments as markdown."""
