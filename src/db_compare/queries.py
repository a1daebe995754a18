"""Read-only SQL Server catalog queries.

Every query returns snake_case column aliases matching the row models in
``db_compare.schema.rows`` and ``db_compare.data.models``.  Aggregated
column lists are joined with ``", "`` (see ``LIST_DELIMITER``) and split
once by the assembler.
"""

LIST_DELIMITER = ", "

TABLES_QUERY = """
    SELECT
        t.TABLE_SCHEMA AS schema_name,
        t.TABLE_NAME AS table_name
    FROM INFORMATION_SCHEMA.TABLES t
    WHERE t.TABLE_TYPE = 'BASE TABLE'
    ORDER BY t.TABLE_SCHEMA, t.TABLE_NAME
"""

COLUMNS_QUERY = """
    SELECT
        c.TABLE_SCHEMA AS schema_name,
        c.TABLE_NAME AS table_name,
        c.COLUMN_NAME AS column_name,
        c.DATA_TYPE AS data_type,
        c.CHARACTER_MAXIMUM_LENGTH AS max_length,
        c.NUMERIC_PRECISION AS precision,
        c.NUMERIC_SCALE AS scale,
        c.IS_NULLABLE AS is_nullable,
        c.COLUMN_DEFAULT AS default_value,
        c.COLLATION_NAME AS collation_name,
        COLUMNPROPERTY(
            OBJECT_ID(QUOTENAME(c.TABLE_SCHEMA) + '.' + QUOTENAME(c.TABLE_NAME)),
            c.COLUMN_NAME,
            'IsIdentity'
        ) AS is_identity,
        IDENT_SEED(QUOTENAME(c.TABLE_SCHEMA) + '.' + QUOTENAME(c.TABLE_NAME)) AS identity_seed,
        IDENT_INCR(QUOTENAME(c.TABLE_SCHEMA) + '.' + QUOTENAME(c.TABLE_NAME)) AS identity_increment
    FROM INFORMATION_SCHEMA.COLUMNS c
    INNER JOIN INFORMATION_SCHEMA.TABLES t
        ON c.TABLE_NAME = t.TABLE_NAME
        AND c.TABLE_SCHEMA = t.TABLE_SCHEMA
    WHERE t.TABLE_TYPE = 'BASE TABLE'
    ORDER BY c.TABLE_SCHEMA, c.TABLE_NAME, c.ORDINAL_POSITION
"""

# i.type > 0 excludes heaps. Ordered aggregates in one scope must share an
# ordering; included columns all have key_ordinal 0, so they fall back to
# index_column_id.
INDEXES_QUERY = """
    SELECT
        s.name AS schema_name,
        t.name AS table_name,
        i.name AS index_name,
        i.type_desc AS index_type,
        i.is_unique AS is_unique,
        i.is_primary_key AS is_primary_key,
        i.filter_definition AS filter_definition,
        STRING_AGG(
            CASE WHEN ic.is_included_column = 0 THEN CAST(c.name AS NVARCHAR(MAX)) END,
            ', '
        ) WITHIN GROUP (ORDER BY ic.key_ordinal, ic.index_column_id) AS columns,
        STRING_AGG(
            CASE WHEN ic.is_included_column = 1 THEN CAST(c.name AS NVARCHAR(MAX)) END,
            ', '
        ) WITHIN GROUP (ORDER BY ic.key_ordinal, ic.index_column_id) AS included_columns
    FROM sys.indexes i
    INNER JOIN sys.tables t ON i.object_id = t.object_id
    INNER JOIN sys.schemas s ON t.schema_id = s.schema_id
    INNER JOIN sys.index_columns ic
        ON i.object_id = ic.object_id
        AND i.index_id = ic.index_id
    INNER JOIN sys.columns c
        ON ic.object_id = c.object_id
        AND ic.column_id = c.column_id
    WHERE i.type > 0
    GROUP BY
        s.name, t.name, i.name, i.type_desc,
        i.is_unique, i.is_primary_key, i.filter_definition
    ORDER BY s.name, t.name, i.name
"""

# Check constraints and foreign keys in one stream, tagged by constraint_type
CONSTRAINTS_QUERY = """
    SELECT
        s.name AS schema_name,
        t.name AS table_name,
        cc.name AS constraint_name,
        cc.type_desc AS constraint_type,
        cc.definition AS definition,
        CAST(c.name AS NVARCHAR(MAX)) AS columns,
        CAST(NULL AS NVARCHAR(128)) AS referenced_table,
        CAST(NULL AS NVARCHAR(MAX)) AS referenced_columns
    FROM sys.check_constraints cc
    INNER JOIN sys.tables t ON cc.parent_object_id = t.object_id
    INNER JOIN sys.schemas s ON t.schema_id = s.schema_id
    LEFT JOIN sys.columns c
        ON cc.parent_object_id = c.object_id
        AND cc.parent_column_id = c.column_id

    UNION ALL

    SELECT
        s.name AS schema_name,
        t.name AS table_name,
        fk.name AS constraint_name,
        'FOREIGN_KEY' AS constraint_type,
        CAST(NULL AS NVARCHAR(MAX)) AS definition,
        STRING_AGG(CAST(pc.name AS NVARCHAR(MAX)), ', ')
            WITHIN GROUP (ORDER BY fkc.constraint_column_id) AS columns,
        rt.name AS referenced_table,
        STRING_AGG(CAST(rc.name AS NVARCHAR(MAX)), ', ')
            WITHIN GROUP (ORDER BY fkc.constraint_column_id) AS referenced_columns
    FROM sys.foreign_keys fk
    INNER JOIN sys.tables t ON fk.parent_object_id = t.object_id
    INNER JOIN sys.schemas s ON t.schema_id = s.schema_id
    INNER JOIN sys.foreign_key_columns fkc ON fk.object_id = fkc.constraint_object_id
    INNER JOIN sys.columns pc
        ON fkc.parent_object_id = pc.object_id
        AND fkc.parent_column_id = pc.column_id
    INNER JOIN sys.tables rt ON fk.referenced_object_id = rt.object_id
    INNER JOIN sys.columns rc
        ON fkc.referenced_object_id = rc.object_id
        AND fkc.referenced_column_id = rc.column_id
    GROUP BY s.name, t.name, fk.name, rt.name

    ORDER BY schema_name, table_name, constraint_name
"""

TRIGGERS_QUERY = """
    SELECT
        s.name AS schema_name,
        t.name AS table_name,
        tr.name AS trigger_name,
        tr.type_desc AS trigger_type,
        m.definition AS definition,
        tr.is_disabled AS is_disabled
    FROM sys.triggers tr
    INNER JOIN sys.tables t ON tr.parent_id = t.object_id
    INNER JOIN sys.schemas s ON t.schema_id = s.schema_id
    INNER JOIN sys.sql_modules m ON tr.object_id = m.object_id
    ORDER BY s.name, t.name, tr.name
"""

# ----------------------------------------------------------------------------
# Row counts, most accurate first
# ----------------------------------------------------------------------------

ROW_COUNT_QUERY = """
    SELECT
        s.name AS schema_name,
        t.name AS table_name,
        CAST(SUM(p.rows) AS BIGINT) AS row_count
    FROM sys.tables t
    INNER JOIN sys.schemas s ON t.schema_id = s.schema_id
    INNER JOIN sys.partitions p ON t.object_id = p.object_id
    WHERE p.index_id IN (0, 1)
      AND t.type = 'U'
    GROUP BY s.name, t.name
    ORDER BY s.name, t.name
"""

ROW_COUNT_QUERY_FALLBACK = """
    SELECT
        SCHEMA_NAME(t.schema_id) AS schema_name,
        t.name AS table_name,
        CAST(SUM(CASE WHEN i.index_id < 2 THEN p.rows ELSE 0 END) AS BIGINT) AS row_count
    FROM sys.tables t
    INNER JOIN sys.partitions p ON t.object_id = p.object_id
    INNER JOIN sys.indexes i
        ON p.object_id = i.object_id
        AND p.index_id = i.index_id
    WHERE t.type = 'U'
    GROUP BY t.schema_id, t.name
    ORDER BY SCHEMA_NAME(t.schema_id), t.name
"""

# Table listing only; every count is reported as 0
ROW_COUNT_QUERY_SIMPLE = """
    SELECT
        TABLE_SCHEMA AS schema_name,
        TABLE_NAME AS table_name,
        0 AS row_count
    FROM INFORMATION_SCHEMA.TABLES
    WHERE TABLE_TYPE = 'BASE TABLE'
    ORDER BY TABLE_SCHEMA, TABLE_NAME
"""
