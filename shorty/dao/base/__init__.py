from shorty.dao.base.record_base_dao import RecordBaseDAO, IdentifierGenerator, RecordVisitor


__all__ = [
    'RecordBaseDAO',
    'IdentifierGenerator',
    'RecordVisitor',
]
