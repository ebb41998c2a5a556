import logging
from datetime import date
from typing import List, Dict, Any, Optional
from database.repository import Repository
from models.insights import OpenPositionCreate

logger = logging.getLogger(__name__)


class PositionsService:
    def __init__(self, repository: Repository):
        self.repository = repository

    async def list_open_positions(self, department: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {'status': 'Open'}
        if department:
            filters['department'] = department
        return self.repository.find('open_positions', filters, order_by='posted_date')

    async def create_open_position(self, position: OpenPositionCreate) -> Dict[str, Any]:
        row = position.model_dump(mode='json')
        row['posted_date'] = row['posted_date'] or date.today().isoformat()
        row['status'] = 'Open'
        stored = self.repository.insert('open_positions', row)
        logger.info(f"Open position created: {position.title} ({position.department})")
        return stored
