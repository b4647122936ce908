"""Factory for creating service instances."""

from geostamp.processor import PhotoBatchProcessor
from geostamp.run_config import ProcessingOptions
from geostamp.services.interfaces import FileMover, MetadataGateway
from geostamp.services.piexif_metadata_gateway import PiexifMetadataGateway
from geostamp.services.quarantine_file_mover import QuarantineFileMover


class ServiceFactory:
    """Factory for creating service instances."""

    @staticmethod
    def create_metadata_gateway() -> MetadataGateway:
        """Create metadata gateway with default implementation."""
        return PiexifMetadataGateway()

    @staticmethod
    def create_file_mover() -> FileMover:
        """Create file mover with default implementation."""
        return QuarantineFileMover()

    @staticmethod
    def create_processor(
        options: ProcessingOptions,
        metadata_gateway: MetadataGateway | None = None,
        file_mover: FileMover | None = None,
        max_workers: int | None = None,
    ) -> PhotoBatchProcessor:
        """Create a batch processor, filling in default services."""
        return PhotoBatchProcessor(
            options=options,
            metadata_gateway=metadata_gateway or ServiceFactory.create_metadata_gateway(),
            file_mover=file_mover or ServiceFactory.create_file_mover(),
            max_workers=max_workers,
        )
