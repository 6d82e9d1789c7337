"""
Mini Storefront Builder

Modules:
    models     - Data models (Store, Product, SourceAsset, RasterizedPage)
    common     - Shared utilities (config loader, logging, errors, text helpers)
    imaging    - Image normalization and PDF page rasterization
    remote     - Document store client and image hosting uploader
    catalog    - Catalog writes, store directory and storefront view logic
    ingestion  - Manual, bulk-image and PDF catalog ingestion
"""

__version__ = "0.3.0"
