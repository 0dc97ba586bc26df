"""Listing scraper package.

Drives one rendering session over paginated, script-rendered listing pages,
extracts records with a two-level selector scheme, and reports completeness.

Key modules:
    models          -- JobConfig, SelectorSpec variants, PageSnapshot, states, reports
    errors          -- ConfigError, RenderTimeoutError, ParseError, EmptyResultError
    selector_spec   -- parse "selector[@attr:name]" mapping expressions
    config          -- mapping file loading and JobConfig validation
    urls            -- relative URL resolution, page parameter synthesis
    base            -- BaseRenderer with timeout fallback and scoped session
    renderers       -- BrowserRenderer (Playwright), HttpRenderer (curl_cffi)
    factory         -- RendererFactory for picking the backend
    extraction      -- ExtractionEngine
    pagination      -- PaginationStrategy and its rules
    traversal       -- TraversalLoop, one attempt over all pages
    resilience      -- RetryEnvelope and run_job
    rate_limiter    -- RateLimiter for the inter-page delay
    backoff         -- BackoffStrategy for the delay between attempts
    quality         -- QualityReporter and summary formatting
    storage         -- JSON and CSV serializers
"""
