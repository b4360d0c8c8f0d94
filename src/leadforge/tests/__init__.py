"""
LeadForge Test Package.

Test categories:
- test_config.py: Configuration and environment variable loading
- test_models.py: Lead, Audit and request model validation
- test_phone.py: Phone reachability and normalization
- test_sources.py: Source resolution and tab grouping
- test_classifier.py: Rule table precedence and pitch generation
- test_listing.py: Deduplication, filtering, ordering and stats
- test_outreach.py: WhatsApp and mailto deep links
- test_board.py: Optimistic board updates over a mocked store
- test_logging_utils.py: Structured and human-readable log formatting
- test_main.py: CLI commands
"""

__all__ = []
