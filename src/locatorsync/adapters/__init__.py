"""Adapters binding the domain ports to Shopify, Google, Slack, SMTP and local files."""
