"""Shared configuration, logging, errors and repositories."""
