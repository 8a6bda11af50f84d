"""
PAGEFIT - Page Accurate Generation of Exported, Fitted Individual Templates

Renders web pages to PDF files sized to their content by driving a headless
browser through a single shared session.

Architecture:
- Intake Context: Batch description loading (manifests, URL=OUTPUT pairs)
- Rendering Context: Browser lifecycle, page readiness, sizing, PDF export
"""

__version__ = "0.1.0"
