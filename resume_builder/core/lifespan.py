from contextlib import asynccontextmanager
import logging

from resume_builder.features.ats_scoring import load_scoring_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    rules = load_scoring_rules()
    logger.info(
        "ats_rules_loaded stopwords=%s technical_terms=%s phrases=%s",
        len(rules.stopwords),
        len(rules.technical_terms),
        len(rules.phrases),
    )
    yield
