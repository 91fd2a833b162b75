import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import StreamingResponse
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_cors_origins, get_log_level
from app.core import database
from app.core.errors import register_exception_handlers
from app.models.schemas import (
    ChatRequest, ChatCompletionRequest, ICPGenerationRequest, CampaignGenerationRequest,
)
from app.routers import campaigns, companies, company_data, icp
from app.services.campaign import campaign_event_generator
from app.services.chat import chat_event_generator, complete_chat
from app.services.icp import icp_generation_event_generator

logging.basicConfig(level=get_log_level())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.init_db()
    logger.info("Database schema ready")
    yield


app = FastAPI(title="ICP Builder API", lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(companies.router, prefix="/api/companies")
app.include_router(company_data.router, prefix="/api/company-data")
app.include_router(icp.router, prefix="/api/icp")
app.include_router(campaigns.router, prefix="/api/campaigns")


@app.post("/chat")
async def chat_endpoint(request: ChatRequest):
    return StreamingResponse(
        chat_event_generator(request.message, request.thread_id),
        media_type="text/event-stream"
    )


@app.post("/api/chat")
async def chat_completion(request: ChatCompletionRequest):
    reply = await complete_chat([m.model_dump() for m in request.messages])
    return {"success": True, **reply}


@app.post("/generate-icp")
async def generate_icp(request: ICPGenerationRequest):
    return StreamingResponse(
        icp_generation_event_generator(company_id=request.companyId),
        media_type="text/event-stream"
    )


@app.post("/generate-campaign")
async def generate_campaign(request: CampaignGenerationRequest):
    return StreamingResponse(
        campaign_event_generator(
            icp_id=request.icpId,
            copy_style=request.copyStyle,
            media_type=request.mediaType,
            image_prompt=request.imagePrompt,
            campaign_details=request.campaignDetails,
        ),
        media_type="text/event-stream"
    )


@app.get("/health")
async def health_check():
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
