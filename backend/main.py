"""FastAPI backend: register papers by DOI, list them and delete them."""
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

from paper_registry.models.records import PaperCreate, PaperRecord
from paper_registry.tasks.paper_service import PaperService, create_paper_service
from paper_registry.utils.errors import (
    APIError,
    DatabaseError,
    NotFoundError,
    StoreDeleteFailure,
    StoreWriteFailure,
    ValidationError,
)
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)

# Shown for every metadata failure; details stay in the log.
FETCH_FAILED_DETAIL = "Could not retrieve metadata for this DOI"


def get_service(request: Request) -> PaperService:
    """Service for this app, built from settings on first use."""
    service = getattr(request.app.state, "service", None)
    if service is None:
        service = create_paper_service()
        request.app.state.service = service
    return service


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    service = getattr(app.state, "service", None)
    if service is not None:
        await service.close()
        logger.info("Paper service closed")


def create_app(service: Optional[PaperService] = None) -> FastAPI:
    app = FastAPI(title="Paper Registry API", lifespan=lifespan)
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def read_root():
        return {"message": "Paper Registry API"}

    @app.get("/api/health")
    def health_check():
        return {"status": "healthy"}

    @app.get("/api/papers", response_model=List[PaperRecord])
    def api_list_papers(service: PaperService = Depends(get_service)):
        """Stored papers, newest first."""
        try:
            return service.list_papers()
        except DatabaseError:
            raise HTTPException(status_code=500, detail="Could not load papers")

    @app.post("/api/papers", response_model=PaperRecord, status_code=status.HTTP_201_CREATED)
    async def api_add_paper(body: PaperCreate, service: PaperService = Depends(get_service)):
        """Fetch, rank and store a paper by DOI."""
        try:
            return await service.add_paper(body.doi)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except NotFoundError:
            raise HTTPException(status_code=404, detail=FETCH_FAILED_DETAIL)
        except APIError:
            raise HTTPException(status_code=502, detail=FETCH_FAILED_DETAIL)
        except StoreWriteFailure:
            raise HTTPException(status_code=500, detail="Could not save the paper")

    @app.delete("/api/papers/{paper_id}", status_code=status.HTTP_204_NO_CONTENT)
    def api_delete_paper(paper_id: int, service: PaperService = Depends(get_service)):
        """Delete a stored paper."""
        try:
            deleted = service.delete_paper(paper_id)
        except StoreDeleteFailure:
            raise HTTPException(status_code=500, detail="Could not delete the paper")
        if not deleted:
            raise HTTPException(status_code=404, detail="Paper not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


app = create_app()
