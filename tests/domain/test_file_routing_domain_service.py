from collab_metrics.domain.entities.submission import StorageTarget
from collab_metrics.domain.services.file_routing_domain_service import (
    FileRoutingDomainService,
    classify_storage_target,
)


def test_media_types_go_to_media_storage():
    service = FileRoutingDomainService()

    assert service.classify("image/png") == StorageTarget.MEDIA
    assert service.classify("video/mp4") == StorageTarget.MEDIA
    assert service.classify("audio/mpeg") == StorageTarget.MEDIA
    assert service.classify("IMAGE/JPEG") == StorageTarget.MEDIA


def test_everything_else_goes_to_document_storage():
    service = FileRoutingDomainService()

    assert service.classify("application/pdf") == StorageTarget.DOCUMENT
    assert service.classify("text/plain") == StorageTarget.DOCUMENT
    assert service.classify("") == StorageTarget.DOCUMENT
    assert service.classify(None) == StorageTarget.DOCUMENT


def test_malformed_content_type_goes_to_document_storage():
    assert classify_storage_target("not a mime type") == StorageTarget.DOCUMENT
    assert classify_storage_target(" video /webm") == StorageTarget.MEDIA
