"""Command line tool for the deploy-kit library."""
