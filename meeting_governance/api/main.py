from fastapi import FastAPI

from meeting_governance.api.routes.approvals import router as approvals_router
from meeting_governance.api.routes.proposals import router as proposals_router
from meeting_governance.config import configure_logging

configure_logging()

app = FastAPI(
    title="Meeting Governance API",
    description="Human-in-the-loop approval of meeting decisions and action items",
    version="0.1.0",
)

app.include_router(proposals_router)
app.include_router(approvals_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
