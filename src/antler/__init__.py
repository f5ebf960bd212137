"""antler: an XML-driven build engine.

A build file declares targets made of tasks::

    <project name="demo" default="build">
        <property name="out" value="build"/>
        <target name="build" depends="init">
            <echo message="Building into ${out}"/>
        </target>
        <target name="init">
            <mkdir dir="${out}"/>
        </target>
    </project>

Run it from the command line with ``antler -f demo.build`` or from Python
with ``antler.loader.load_project()`` and ``antler.engine.Project``.
"""

__version__ = "0.1.0"
