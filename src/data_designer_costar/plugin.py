from data_designer.plugins.plugin import Plugin, PluginType

costar_plugin = Plugin(
    config_qualified_name="data_designer_costar.config.CostarColumnConfig",
    impl_qualified_name="data_designer_costar.generator.CostarColumnGenerator",
    plugin_type=PluginType.COLUMN_GENERATOR,
)
